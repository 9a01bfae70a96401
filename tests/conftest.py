"""
Shared fixtures.

CharTokenizer stands in for a Hugging Face tokenizer so the loader tests run
offline: every character maps to its code point and EOS is id 0.
"""

import pytest


class CharTokenizer:
    eos_token_id = 0
    eos_token = "<eos>"
    pad_token = None
    vocab_size = 0x110000

    def encode(self, text):
        return [ord(ch) for ch in text]

    def decode(self, token_ids):
        return "".join(chr(i) for i in token_ids if i != self.eos_token_id)


@pytest.fixture
def char_tokenizer():
    return CharTokenizer()


@pytest.fixture
def eight_tokens():
    return [10, 20, 30, 40, 50, 60, 70, 80]
