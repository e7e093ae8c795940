"""
Progress Chat - personal AI assistant backend and client
"""
__version__ = "1.0.0"
