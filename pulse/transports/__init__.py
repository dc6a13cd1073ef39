"""Concrete broker transports"""
