"""Token Vesting Engine.

A pure accounting core for single-beneficiary token vesting: cliff plus
linear schedules, beneficiary claims and grantor revocation. Operations
return declarative transfer instructions; executing them is left to the
integrator.
"""

__version__ = "0.1.0"
