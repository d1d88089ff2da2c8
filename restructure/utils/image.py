""" Render DOT files into images with the Graphviz dot tool. """

import os
import subprocess


def get_dot_exe():
    """ Provide the dot executable. To override the executable path, set
    the ``RESTRUCTURE_DOT_EXE`` environment variable.
    """
    return os.getenv('RESTRUCTURE_DOT_EXE') or 'dot'


def render_image(dot_path, fmt='png'):
    """ Render the given DOT file next to itself, return the image path.

    Raises OSError when dot cannot be started, and
    subprocess.CalledProcessError when dot fails.
    """
    base, _ = os.path.splitext(dot_path)
    image_path = '{}.{}'.format(base, fmt)
    subprocess.check_output(
        [get_dot_exe(), '-T' + fmt, '-o', image_path, dot_path],
        stderr=subprocess.STDOUT)
    return image_path
