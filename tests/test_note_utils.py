import unittest

from chromatic_tuner.note_utils import (
    cents_offset,
    frequency_of_note,
    get_note_name,
    nearest_index_for_name,
    note_index_from_frequency,
    note_label,
    note_name_from_index,
)


class TestNoteMapping(unittest.TestCase):
    def test_a4_anchor(self):
        self.assertEqual(note_index_from_frequency(440.0), 69)
        self.assertEqual(cents_offset(440.0, 69), 0)
        self.assertAlmostEqual(frequency_of_note(69), 440.0, delta=1e-9)

    def test_octaves(self):
        self.assertAlmostEqual(frequency_of_note(81), 880.0, delta=1e-9)
        self.assertAlmostEqual(frequency_of_note(57), 220.0, delta=1e-9)
        self.assertEqual(note_index_from_frequency(110.0), 45)

    def test_nearest_note(self):
        # A#4 and a slightly flat A4 both snap to the nearest semitone
        self.assertEqual(note_index_from_frequency(466.16), 70)
        self.assertEqual(note_index_from_frequency(430.0), 69)
        self.assertEqual(note_index_from_frequency(82.41), 40)

    def test_cents_sign(self):
        self.assertEqual(cents_offset(445.0, 69), 19)
        self.assertEqual(cents_offset(435.0, 69), -20)

    def test_round_trip_within_half_semitone(self):
        for freq in (41.2, 98.0, 261.63, 329.63, 1046.5, 3000.0):
            index = note_index_from_frequency(freq)
            self.assertLessEqual(abs(cents_offset(freq, index)), 51)

    def test_reference_pitch(self):
        self.assertEqual(note_index_from_frequency(442.0, a4=442.0), 69)
        self.assertAlmostEqual(frequency_of_note(69, a4=432.0), 432.0, delta=1e-9)
        self.assertEqual(cents_offset(442.0, 69, a4=442.0), 0)

    def test_note_names(self):
        self.assertEqual(note_name_from_index(69), "A")
        self.assertEqual(note_name_from_index(70), "A#")
        self.assertEqual(note_name_from_index(70, use_flats=True), "Bb")
        self.assertEqual(note_name_from_index(60), "C")
        self.assertEqual(note_name_from_index(21), "A")


class TestScientificPitchNotation(unittest.TestCase):
    def test_middle_c(self):
        self.assertEqual(get_note_name(261.63), "C4")

    def test_a4(self):
        self.assertEqual(get_note_name(440.0), "A4")

    def test_octave_transitions(self):
        self.assertEqual(get_note_name(246.94), "B3")
        self.assertEqual(get_note_name(261.63), "C4")

    def test_sharps_and_flats(self):
        self.assertEqual(get_note_name(277.18), "C#4")
        self.assertEqual(get_note_name(311.13), "D#4")
        self.assertEqual(get_note_name(277.18, use_flats=True), "Db4")
        self.assertEqual(get_note_name(311.13, use_flats=True), "Eb4")

    def test_note_label(self):
        self.assertEqual(note_label(69), "A4")
        self.assertEqual(note_label(60), "C4")
        self.assertEqual(note_label(59), "B3")
        self.assertEqual(note_label(70, use_flats=True), "Bb4")

    def test_name_placed_near_note(self):
        self.assertEqual(nearest_index_for_name("B", 72), 71)
        self.assertEqual(nearest_index_for_name("C", 71), 72)
        self.assertEqual(nearest_index_for_name("A", 69), 69)
        self.assertEqual(nearest_index_for_name("Bb", 69), 70)
        self.assertEqual(nearest_index_for_name("G#", 69), 68)

    def test_no_pitch(self):
        self.assertEqual(get_note_name(0.0), "---")
        self.assertEqual(get_note_name(-5.0), "---")
        self.assertEqual(get_note_name(float("inf")), "---")


if __name__ == "__main__":
    unittest.main()
