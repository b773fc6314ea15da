"""Domain services shared by the API, the client sync and background tasks"""
