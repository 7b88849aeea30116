"""
safecond core: errors, IR and the expression language pipeline.
"""
