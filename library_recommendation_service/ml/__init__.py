"""Similarity scoring for catalog lookups"""
