"""Parent/child models scanned from disk by the validator tests."""
