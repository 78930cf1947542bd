"""
Client-side form state shared with the recommendation service contract.
"""
