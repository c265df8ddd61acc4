"""核心算法与调度。"""
