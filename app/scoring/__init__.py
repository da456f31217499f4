"""
scoring/ - Applicant Scoring Engine

Modules:
    utils.py              - Decimal utilities
    applicant_scorer.py   - Weighted 14-category applicant scorer
    ranker.py             - Descending-score ranking with register-number tie-break
    overrides.py          - Evaluation session: faculty overrides, discards, batch save
"""
