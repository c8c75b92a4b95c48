"""
Listings App - Garment Listings

Owners list garments for swap or point redemption; everyone else browses the
available ones. Listing status is driven by the exchange ledger through the
state machine in ``state_machine.py``.
"""
