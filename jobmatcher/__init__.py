# SPDX-License-Identifier: Apache-2.0
"""
Job Matcher: MCP tools that match resume text against a job-matching backend
and answer with a Markdown artifact.
"""
__version__ = "1.0.0"
