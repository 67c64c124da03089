"""Auction core: storage, state, contract"""
