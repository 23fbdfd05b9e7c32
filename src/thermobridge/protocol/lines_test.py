import random
import unittest

from hamcrest import assert_that, is_

from thermobridge.protocol.lines import LineBuffer


def feed_all(sut, chunks):
    lines = []
    for chunk in chunks:
        lines.extend(sut.feed(chunk))
    return lines


class LineBufferTest(unittest.TestCase):

    def test_empty_chunk(self):
        sut = LineBuffer()
        assert_that(sut.feed(b''), is_([]))
        assert_that(sut.pending, is_(b''))

    def test_single_line(self):
        sut = LineBuffer()
        assert_that(sut.feed(b'PV:12.5\r\n'), is_([b'PV:12.5']))
        assert_that(sut.pending, is_(b''))

    def test_all_terminator_styles(self):
        sut = LineBuffer()
        assert_that(sut.feed(b'a\nb\rc\r\nd\n\re'), is_([b'a', b'b', b'c', b'd']))
        assert_that(sut.pending, is_(b'e'))

    def test_empty_segments_are_dropped(self):
        sut = LineBuffer()
        assert_that(sut.feed(b'\r\n\r\n\nSP:180\n\n'), is_([b'SP:180']))

    def test_partial_line_is_retained(self):
        sut = LineBuffer()
        assert_that(sut.feed(b'PV:1'), is_([]))
        assert_that(sut.pending, is_(b'PV:1'))
        assert_that(len(sut), is_(4))
        assert_that(sut.feed(b'23.4\r'), is_([b'PV:123.4']))
        assert_that(sut.pending, is_(b''))

    def test_terminator_split_across_chunks(self):
        sut = LineBuffer()
        lines = feed_all(sut, [b'one\r', b'\ntwo\r', b'\n'])
        assert_that(lines, is_([b'one', b'two']))

    def test_whitespace_is_kept(self):
        sut = LineBuffer()
        assert_that(sut.feed(b'  hello world \n'), is_([b'  hello world ']))

    def test_lines_and_pending_reconstruct_input(self):
        rnd = random.Random(42)
        alphabet = b'PV:0123456789.ab \r\n'
        for _ in range(50):
            data = bytes(rnd.choice(alphabet) for _ in range(rnd.randint(0, 200)))
            cuts = sorted(rnd.randint(0, len(data)) for _ in range(rnd.randint(0, 10)))
            chunks = [data[i:j] for i, j in zip([0] + cuts, cuts + [len(data)])]
            sut = LineBuffer()
            lines = feed_all(sut, chunks)
            expected = data.replace(b'\r', b'').replace(b'\n', b'')
            assert_that(b''.join(lines) + sut.pending, is_(expected))
            assert_that(b'\r' in sut.pending or b'\n' in sut.pending, is_(False))

    def test_overlong_line_is_dropped_whole(self):
        sut = LineBuffer(max_pending=4)
        assert_that(sut.feed(b'abcdef'), is_([]))
        assert_that(sut.pending, is_(b''))
        assert_that(sut.discarding, is_(True))
        assert_that(sut.feed(b'PV:5'), is_([]))
        assert_that(sut.feed(b'00\nSP:1\n'), is_([b'SP:1']))
        assert_that(sut.overflow, is_(12))
        assert_that(sut.discarding, is_(False))

    def test_overlong_line_ending_in_a_chunk(self):
        sut = LineBuffer(max_pending=6)
        assert_that(feed_all(sut, [b'ok\nHeater fault code PV:500', b'\r\nPV:1\n']), is_([b'ok', b'PV:1']))
        assert_that(sut.overflow, is_(len(b'Heater fault code PV:500')))

    def test_line_at_the_limit_is_kept(self):
        sut = LineBuffer(max_pending=4)
        assert_that(feed_all(sut, [b'PV:1', b'\n']), is_([b'PV:1']))
        assert_that(sut.overflow, is_(0))

    def test_clear(self):
        sut = LineBuffer(max_pending=2)
        sut.feed(b'abc')
        sut.clear()
        assert_that(sut.pending, is_(b''))
        assert_that(sut.overflow, is_(0))
        assert_that(sut.feed(b'x\n'), is_([b'x']))
