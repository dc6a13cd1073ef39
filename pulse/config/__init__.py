"""Configuration for pulse"""
