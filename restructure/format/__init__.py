""" File formats which can be read and written. """
