"""Aurae insights engine: pattern statistics over logged headache episodes"""
