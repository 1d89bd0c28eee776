"""
Git Write Module

Branch pipeline that builds commits from blobs, trees and refs.
"""

from github_api.git.branch_pipeline import BranchPipeline, PipelineRun

__all__ = ["BranchPipeline", "PipelineRun"]
