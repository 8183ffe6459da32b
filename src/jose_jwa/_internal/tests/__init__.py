"""jose_jwa tests"""
