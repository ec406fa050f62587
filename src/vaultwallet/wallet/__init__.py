"""
Single-address wallet: keys, UTXO tracking, fee estimation and transaction building.
"""
