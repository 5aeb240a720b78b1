"""Stockage des arbres académiques et données de démonstration"""
