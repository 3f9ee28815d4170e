"""
Core types for tokenization.
"""

type Token = int
type TokenBytes = bytes
type TokenPair = tuple[Token, Token]
type PairCounts = dict[TokenPair, int]
type Encoding = dict[TokenPair, Token]
type Vocabulary = dict[Token, TokenBytes]
type TextInput = str | bytes | bytearray | list[str]
