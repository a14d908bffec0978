"""
core package
------------
Ambient infrastructure: exceptions, logging, configuration, paths,
validators and backups.
"""
