"""
Admin Module

Administrator dashboard and the administrative endpoints for accounts,
postings and applications.
"""
