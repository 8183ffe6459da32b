"""jose_jwa's internal implementation"""
