"""Models package initialization"""
from .check_result import CheckResult, CycleReport

__all__ = ['CheckResult', 'CycleReport']
