"""compilerun: compile & run single C/C++ files.

Compiles one source file with the configured compiler and flags, then runs
the resulting program in the current terminal or a new terminal window.
"""

__version__ = "1.0.7"
