"""Badges, badge rules and NFT tier unlocks."""
