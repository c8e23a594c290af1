"""
DemandScan - Buyer-intent detection pipeline.

Polls registered public pages, extracts their visible text, matches it
against curated product and intent keywords, and notifies admins about
new leads.
"""

__version__ = "0.1.0"
__app_name__ = "demandscan"
