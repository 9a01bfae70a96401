"""
Tests for the sliding-window sampler.

A window of max_length tokens starts at offsets 0, stride, 2*stride, ...
and its target is the same window shifted forward by one token, so the
last valid offset i satisfies i + max_length <= N - 1.
"""

import numpy as np
import pytest

from data.sampler import (
    InvalidArgument,
    WindowSampler,
    iter_samples,
    num_windows,
    sample,
    window_matrix,
    window_offsets,
)


def offset_of(tokens, window):
    """Position of an input window in the source sequence."""
    for i in range(len(tokens) - len(window) + 1):
        if list(tokens[i:i + len(window)]) == window:
            return i
    raise AssertionError(f"{window} is not a slice of {tokens}")


class TestSampleScenarios:
    """Worked examples with known outputs."""

    def test_stride_one_overlapping(self, eight_tokens):
        pairs = sample(eight_tokens, max_length=4, stride=1)

        assert [inp for inp, _ in pairs] == [
            [10, 20, 30, 40],
            [20, 30, 40, 50],
            [30, 40, 50, 60],
            [40, 50, 60, 70],
        ]
        assert [tgt for _, tgt in pairs] == [
            [20, 30, 40, 50],
            [30, 40, 50, 60],
            [40, 50, 60, 70],
            [50, 60, 70, 80],
        ]

    def test_stride_equal_to_max_length(self, eight_tokens):
        pairs = sample(eight_tokens, max_length=4, stride=4)

        # offset 4 would need tokens[5:9], one past the end
        assert pairs == [([10, 20, 30, 40], [20, 30, 40, 50])]

    def test_sequence_too_short_is_empty(self):
        assert sample([1, 2, 3], max_length=4, stride=1) == []

    def test_sequence_exactly_max_length_is_empty(self):
        assert sample([1, 2, 3, 4], max_length=4, stride=1) == []

    def test_one_extra_token_gives_one_pair(self):
        assert sample([1, 2, 3, 4, 5], max_length=4, stride=3) == [([1, 2, 3, 4], [2, 3, 4, 5])]

    def test_empty_tokens(self):
        assert sample([], max_length=1, stride=1) == []

    def test_max_length_zero_raises(self, eight_tokens):
        with pytest.raises(InvalidArgument):
            sample(eight_tokens, max_length=0, stride=1)

    def test_stride_zero_raises(self, eight_tokens):
        with pytest.raises(InvalidArgument):
            sample(eight_tokens, max_length=4, stride=0)

    def test_negative_arguments_raise(self, eight_tokens):
        with pytest.raises(InvalidArgument):
            sample(eight_tokens, max_length=-1, stride=1)
        with pytest.raises(InvalidArgument):
            sample(eight_tokens, max_length=4, stride=-3)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            sample([1, 2, 3], max_length=0, stride=1)

    def test_validation_happens_before_length_check(self):
        """Short input must not mask an invalid stride."""
        with pytest.raises(InvalidArgument):
            sample([], max_length=4, stride=0)

    def test_non_integer_arguments_raise_type_error(self, eight_tokens):
        with pytest.raises(TypeError):
            sample(eight_tokens, max_length=2.5, stride=1)
        with pytest.raises(TypeError):
            sample(eight_tokens, max_length=4, stride=True)

    def test_stride_two_nine_tokens(self):
        tokens = list(range(100, 109))
        pairs = sample(tokens, max_length=4, stride=2)

        assert [offset_of(tokens, inp) for inp, _ in pairs] == [0, 2, 4]
        assert pairs[-1] == ([104, 105, 106, 107], [105, 106, 107, 108])

    def test_gapped_windows(self):
        tokens = list(range(12))
        pairs = sample(tokens, max_length=2, stride=5)

        # tokens 2..4 and 7..9 never start an input window
        assert [inp for inp, _ in pairs] == [[0, 1], [5, 6]]
        assert [tgt for _, tgt in pairs] == [[1, 2], [6, 7]]

    def test_accepts_tuple_and_numpy_input(self, eight_tokens):
        expected = sample(eight_tokens, max_length=3, stride=2)

        assert sample(tuple(eight_tokens), max_length=3, stride=2) == expected
        from_array = sample(np.array(eight_tokens), max_length=3, stride=2)
        assert from_array == expected
        assert all(type(t) is int for inp, tgt in from_array for t in inp + tgt)

    def test_windows_hold_python_ints(self):
        tokens = np.arange(6, dtype=np.int64)

        for inp, tgt in iter_samples(tokens, max_length=2, stride=2):
            assert all(type(t) is int for t in inp + tgt)

        sampler = WindowSampler(tokens, max_length=2, stride=2)
        inp, tgt = sampler[0]
        assert all(type(t) is int for t in inp + tgt)
        assert all(type(t) is int for pair in sampler for t in pair[0])

    def test_input_not_mutated(self, eight_tokens):
        original = list(eight_tokens)
        sample(eight_tokens, max_length=3, stride=1)
        assert eight_tokens == original


class TestSampleProperties:
    """Properties checked over a grid of (N, max_length, stride)."""

    GRID = [
        (n, max_length, stride)
        for n in (0, 1, 5, 9, 17, 32)
        for max_length in (1, 2, 4, 7)
        for stride in (1, 2, 3, 4, 8)
    ]

    @pytest.mark.parametrize("n,max_length,stride", GRID)
    def test_window_properties(self, n, max_length, stride):
        tokens = [1000 + i for i in range(n)]
        pairs = sample(tokens, max_length, stride)

        offsets = [inp[0] - 1000 for inp, _ in pairs]

        for (inp, tgt), i in zip(pairs, offsets):
            assert len(inp) == max_length
            assert len(tgt) == max_length
            assert i + max_length <= n - 1
            assert tgt == [tokens[i + 1 + k] for k in range(max_length)]

        assert offsets == list(range(0, len(offsets) * stride, stride))
        assert len(pairs) == num_windows(n, max_length, stride)

        if n <= max_length:
            assert pairs == []
        else:
            assert len(pairs) == (n - max_length - 1) // stride + 1

    @pytest.mark.parametrize("max_length", [1, 3, 5])
    def test_no_overlap_when_stride_equals_max_length(self, max_length):
        tokens = list(range(40))
        pairs = sample(tokens, max_length=max_length, stride=max_length)

        seen = set()
        for inp, _ in pairs:
            assert seen.isdisjoint(inp)
            seen.update(inp)

    def test_smaller_stride_gives_more_pairs(self):
        tokens = list(range(50))
        counts = [len(sample(tokens, max_length=8, stride=s)) for s in (1, 2, 4, 8)]
        assert counts == sorted(counts, reverse=True)
        assert counts[0] > counts[-1]

    def test_idempotent(self, eight_tokens):
        assert sample(eight_tokens, 3, 2) == sample(eight_tokens, 3, 2)

    def test_returned_windows_are_independent(self, eight_tokens):
        first = sample(eight_tokens, 4, 1)
        first[0][0][0] = -1
        assert sample(eight_tokens, 4, 1)[0][0][0] == 10


class TestOffsets:
    """Offset progression and window counts."""

    def test_window_offsets(self):
        assert list(window_offsets(9, 4, 2)) == [0, 2, 4]
        assert list(window_offsets(8, 4, 1)) == [0, 1, 2, 3]
        assert list(window_offsets(3, 4, 1)) == []

    def test_num_windows(self):
        assert num_windows(8, 4, 1) == 4
        assert num_windows(8, 4, 4) == 1
        assert num_windows(4, 4, 1) == 0
        assert num_windows(0, 1, 1) == 0

    def test_num_windows_validates(self):
        with pytest.raises(InvalidArgument):
            num_windows(10, 0, 1)


class TestIterSamples:
    """The lazy generator form."""

    def test_matches_sample(self, eight_tokens):
        assert list(iter_samples(eight_tokens, 3, 2)) == sample(eight_tokens, 3, 2)

    def test_validates_on_call(self, eight_tokens):
        # raises without having to advance the generator
        with pytest.raises(InvalidArgument):
            iter_samples(eight_tokens, 4, 0)

    def test_is_lazy(self):
        gen = iter_samples(list(range(1_000_000)), max_length=16, stride=1)
        first = next(gen)
        assert first == (list(range(16)), list(range(1, 17)))


class TestWindowSampler:
    """Restartable, indexable sampler."""

    def test_iteration_restarts(self, eight_tokens):
        sampler = WindowSampler(eight_tokens, max_length=4, stride=1)

        first_pass = list(sampler)
        second_pass = list(sampler)

        assert first_pass == second_pass == sample(eight_tokens, 4, 1)

    def test_len(self, eight_tokens):
        assert len(WindowSampler(eight_tokens, 4, 1)) == 4
        assert len(WindowSampler([1, 2, 3], 4, 1)) == 0

    def test_getitem(self, eight_tokens):
        sampler = WindowSampler(eight_tokens, max_length=4, stride=2)

        assert sampler[0] == ([10, 20, 30, 40], [20, 30, 40, 50])
        assert sampler[1] == ([30, 40, 50, 60], [40, 50, 60, 70])
        assert sampler[-1] == sampler[len(sampler) - 1]

    def test_getitem_out_of_range(self, eight_tokens):
        sampler = WindowSampler(eight_tokens, max_length=4, stride=2)
        with pytest.raises(IndexError):
            sampler[len(sampler)]

    def test_snapshot_of_tokens(self, eight_tokens):
        sampler = WindowSampler(eight_tokens, max_length=4, stride=4)
        eight_tokens[1] = 999
        assert sampler[0] == ([10, 20, 30, 40], [20, 30, 40, 50])

    def test_invalid_arguments(self, eight_tokens):
        with pytest.raises(InvalidArgument):
            WindowSampler(eight_tokens, 0, 1)
        with pytest.raises(InvalidArgument):
            WindowSampler(eight_tokens, 4, 0)

    def test_repr(self, eight_tokens):
        assert "num_samples=4" in repr(WindowSampler(eight_tokens, 4, 1))


class TestWindowMatrix:
    """Strided numpy views of all windows."""

    def test_shapes_and_values(self, eight_tokens):
        inputs, targets = window_matrix(eight_tokens, max_length=4, stride=1)

        assert inputs.shape == (4, 4)
        assert targets.shape == (4, 4)
        assert inputs.dtype == np.int64
        np.testing.assert_array_equal(inputs[0], [10, 20, 30, 40])
        np.testing.assert_array_equal(targets[-1], [50, 60, 70, 80])
        np.testing.assert_array_equal(inputs[:, 1:], targets[:, :-1])

    def test_matches_sample(self):
        tokens = list(range(23))
        inputs, targets = window_matrix(tokens, max_length=5, stride=3)
        pairs = sample(tokens, max_length=5, stride=3)

        assert inputs.tolist() == [inp for inp, _ in pairs]
        assert targets.tolist() == [tgt for _, tgt in pairs]

    def test_empty(self):
        inputs, targets = window_matrix([1, 2, 3], max_length=4, stride=1)
        assert inputs.shape == (0, 4)
        assert targets.shape == (0, 4)
        assert not inputs.flags.writeable
        assert not targets.flags.writeable

    def test_read_only(self, eight_tokens):
        inputs, _ = window_matrix(eight_tokens, max_length=4, stride=1)
        with pytest.raises(ValueError):
            inputs[0, 0] = 1

    def test_copies_tokens(self):
        tokens = np.arange(10, dtype=np.int64)
        inputs, targets = window_matrix(tokens, max_length=3, stride=3)
        tokens[0] = -1
        tokens[1] = -1

        assert inputs[0].tolist() == [0, 1, 2]
        assert targets[0].tolist() == [1, 2, 3]

    def test_invalid_arguments(self, eight_tokens):
        with pytest.raises(InvalidArgument):
            window_matrix(eight_tokens, max_length=4, stride=0)
