"""
Time bank rules - how posted hours move a balance, how balances are
totalled in reports, and the texts sent to collaborators when an
administrator decides on one of their requests.
"""
