""" Main entry point """

from .cli.restructure import restructure


if __name__ == "__main__":
    restructure()
