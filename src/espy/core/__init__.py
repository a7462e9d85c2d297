"""
Core Package.

Contains the transpilation machinery:
- Node model and parser bridge
- Generic traversal
- Pattern compiler and rule-driven rewriter
- Python code generator
- AST Engine
"""
