"""Message envelope, identity, wire codec and transport contracts"""
