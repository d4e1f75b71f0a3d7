"""
pylc3 - An LC-3 simulator.
"""
