""" Command line utilities.

The main command is ``restructure``, which is also available as
``python -m restructure``.
"""
