"""Configuration, logging, erreurs et session utilisateur"""
