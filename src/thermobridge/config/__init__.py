"""
Layered configuration built on ConfigObj: defaults shipped with the package, a platform
specialization, a user override and a local file, validated against a schema.
"""
