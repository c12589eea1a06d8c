from __future__ import annotations

import unittest
from xml.etree import ElementTree

from scoretime.musicxml.errors import InvalidPitch, InvalidStaff, MissingDuration, MissingVoice
from scoretime.musicxml.extractor import read_content
from scoretime.musicxml.events import Event, Rest
from scoretime.musicxml.pitch import SpelledPitch, parse_pitch, parse_pitches
from scoretime.musicxml.readers import read_duration, read_staff, read_voice


def _xml(text: str) -> ElementTree.Element:
    return ElementTree.fromstring(text)


class PitchParserTests(unittest.TestCase):
    def test_alter_defaults_to_zero(self) -> None:
        parsed = parse_pitch(_xml("<pitch><step>C</step><octave>4</octave></pitch>"))
        self.assertEqual(parsed, SpelledPitch(step="C", alter=0, octave=4))

    def test_reads_alter(self) -> None:
        parsed = parse_pitch(_xml("<pitch><step>B</step><alter>-1</alter><octave>3</octave></pitch>"))
        self.assertEqual(parsed, SpelledPitch("B", -1, 3))

    def test_step_passes_through_verbatim(self) -> None:
        parsed = parse_pitch(_xml("<pitch><step>Hx</step><octave>4</octave></pitch>"))
        self.assertEqual(parsed.step, "Hx")

    def test_missing_step(self) -> None:
        with self.assertRaises(InvalidPitch):
            parse_pitch(_xml("<pitch><octave>4</octave></pitch>"))

    def test_missing_octave(self) -> None:
        with self.assertRaises(InvalidPitch):
            parse_pitch(_xml("<pitch><step>C</step></pitch>"))

    def test_unparsable_alter(self) -> None:
        with self.assertRaises(InvalidPitch) as ctx:
            parse_pitch(_xml("<pitch><step>C</step><alter>sharp</alter><octave>4</octave></pitch>"))
        self.assertIn("alter", ctx.exception.detail)

    def test_value_equality(self) -> None:
        self.assertEqual(SpelledPitch("G", 0, 4), SpelledPitch("G", 0, 4))
        self.assertEqual(len({SpelledPitch("G", 0, 4), SpelledPitch("G", 0, 4)}), 1)

    def test_music21_derivations(self) -> None:
        self.assertEqual(SpelledPitch("C", 0, 4).midi, 60)
        self.assertEqual(SpelledPitch("F", 1, 4).midi, 66)
        self.assertEqual(SpelledPitch("B", -1, 3).name, "B-3")
        self.assertAlmostEqual(SpelledPitch("A", 0, 4).frequency, 440.0, places=3)

    def test_parse_pitches_keeps_order(self) -> None:
        note_elem = _xml(
            "<note><pitch><step>E</step><octave>4</octave></pitch>"
            "<pitch><step>C</step><octave>4</octave></pitch></note>"
        )
        self.assertEqual([p.step for p in parse_pitches(note_elem)], ["E", "C"])


class ContentTests(unittest.TestCase):
    def test_rest_child_marks_rest(self) -> None:
        self.assertEqual(read_content(_xml("<note><rest/><duration>4</duration></note>")), Rest())

    def test_unpitched_note_is_event_without_pitches(self) -> None:
        content = read_content(_xml("<note><unpitched/><duration>4</duration></note>"))
        self.assertEqual(content, Event(pitches=()))


class ReaderTests(unittest.TestCase):
    def test_duration(self) -> None:
        self.assertEqual(read_duration(_xml("<note><duration> 12 </duration></note>")), 12)

    def test_missing_duration(self) -> None:
        with self.assertRaises(MissingDuration):
            read_duration(_xml("<note><voice>1</voice></note>"))

    def test_negative_or_fractional_duration(self) -> None:
        for value in ("-1", "1.5", "abc"):
            with self.subTest(value=value):
                with self.assertRaises(MissingDuration):
                    read_duration(_xml(f"<backup><duration>{value}</duration></backup>"))

    def test_grace_note_without_duration_reads_zero(self) -> None:
        self.assertEqual(read_duration(_xml("<note><grace/><voice>1</voice></note>")), 0)

    def test_voice_is_mandatory(self) -> None:
        with self.assertRaises(MissingVoice):
            read_voice(_xml("<note><duration>4</duration></note>"))

    def test_voice_must_be_integer(self) -> None:
        with self.assertRaises(MissingVoice):
            read_voice(_xml("<note><voice>soprano</voice></note>"))

    def test_staff_defaults_to_one(self) -> None:
        self.assertEqual(read_staff(_xml("<note><voice>1</voice></note>")), 1)

    def test_staff_is_read(self) -> None:
        self.assertEqual(read_staff(_xml("<note><staff>2</staff></note>")), 2)

    def test_invalid_staff(self) -> None:
        for value in ("0", "two"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidStaff):
                    read_staff(_xml(f"<note><staff>{value}</staff></note>"))


if __name__ == "__main__":
    unittest.main()
