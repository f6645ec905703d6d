"""Evidence discovery, trust store and signature verification"""
