"""
Real-time Mafia room server.
"""
