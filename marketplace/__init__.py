"""Freelance marketplace API"""
