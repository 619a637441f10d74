"""Core EVM data types: hashes, specs, bytecode, state, environment, results and database interfaces."""