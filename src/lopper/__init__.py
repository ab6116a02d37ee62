"""Interactive local branch deletion tool.

Features:
- List local branches that are safe to consider for deletion
- Protected branches that can never be deleted
- Exclusion patterns passed on the command line
- Interactive multi-select with a per-branch preview
- Re-validation of every branch right before it is deleted
"""

__version__ = "0.1.0"
