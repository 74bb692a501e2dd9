"""
routinecal: turn a BRAC University class routine into calendar events.
"""
