"""Standard precompiled contracts (ecrecover, hashes, identity, alt_bn128, BLAKE2 F) and their registry."""