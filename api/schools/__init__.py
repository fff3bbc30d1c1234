"""
School registration feature: intake (multipart insert) and listing.

SQL lives in `repository.py`; request flow in `service.py`; HTTP wiring in
`router.py`.
"""
