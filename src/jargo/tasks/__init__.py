"""
jargo task modules.

Modules are collected into the program namespace by the package __init__.py
using Collection.from_module().
"""
