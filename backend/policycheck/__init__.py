"""PolicyCheck: clause extraction, risk scoring and signed assessments for seller policies."""
