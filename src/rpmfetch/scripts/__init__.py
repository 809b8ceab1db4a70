"""Wrapper for running commandline scripts."""

import sys
from importlib import import_module


def run(script_name):
    """Run a given script module."""
    try:
        from snakeoil.cli.tool import Tool
        script = import_module(f"rpmfetch.scripts.{script_name.replace('-', '_')}")
    except ImportError as e:
        sys.stderr.write(f'Failed importing: {e}!\n')
        py_version = '.'.join(map(str, sys.version_info[:3]))
        sys.stderr.write(
            'Verify that rpmfetch and its deps are properly installed '
            f'and/or PYTHONPATH is set correctly for python {py_version}.\n')
        # show traceback in debug mode or for unhandled exceptions
        if '--debug' in sys.argv[1:] or not all((e.__cause__, e.__context__)):
            sys.stderr.write('\n')
            raise
        sys.stderr.write('Add --debug to the commandline for a traceback.\n')
        sys.exit(1)

    tool = Tool(script.argparser)
    sys.exit(tool())


def main():
    """Console script entry point."""
    run("rpmfetch")


if __name__ == '__main__':
    run('rpmfetch')
