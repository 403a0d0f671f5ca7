"""This is the processing submodule.

This module contains the functionality necessary to score epoch data: validation
of the input and the Sadeh sleep/wake classification.
"""
