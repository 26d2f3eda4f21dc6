"""
Candidate/job matching domain.
"""
