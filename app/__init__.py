"""
Command line front end and loader configuration.
"""
