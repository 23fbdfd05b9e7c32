"""
Small building blocks shared by the bridge: event dispatch, value objects, explicit outcomes
and background workers.
"""
