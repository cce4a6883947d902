# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import io
import os
import tempfile
import unittest
from unittest.mock import patch, MagicMock

from docx import Document

from resume_checker.generator import (
    ResumeGenerator,
    enhance_description,
    format_date_for_ats,
    generate_resume,
    optimize_text_for_ats,
)
from resume_checker.models import (
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    StructuredResume,
)
from resume_checker.scorer import score_resume


def sample_resume() -> StructuredResume:
    return StructuredResume(
        personal_info=PersonalInfo(name="Jane Doe", email="jane@example.com", phone="555-123-4567"),
        education=[EducationEntry(degree="B.Sc Computer Science", institution="State University",
                                  date="15.06.2021", gpa="3.8")],
        experience=[ExperienceEntry(title="Software Engineer", company="Acme", date="Jan 2021 - Present",
                                    description=["built APIs for 300 users", "reduced latency by 30%"])],
        skills=["Python", "SQL", "React", "Go"],
    )


class TestFormatDate(unittest.TestCase):
    def test_numeric_dates(self):
        self.assertEqual(format_date_for_ats("15.06.2021"), "06/2021")
        self.assertEqual(format_date_for_ats("12/31/2020"), "12/2020")
        self.assertEqual(format_date_for_ats("5-3-99"), "03/1999")

    def test_month_names(self):
        self.assertEqual(format_date_for_ats("Aug 2019"), "08/2019")
        self.assertEqual(format_date_for_ats("January 15, 2020"), "01/2020")
        self.assertEqual(format_date_for_ats("Aug 2019 - Present"), "08/2019 - Present")

    def test_passthrough(self):
        self.assertEqual(format_date_for_ats("Present"), "Present")
        self.assertEqual(format_date_for_ats("2016 - 2020"), "2016 - 2020")
        self.assertEqual(format_date_for_ats(""), "")


class TestTextHelpers(unittest.TestCase):
    def test_enhance_description(self):
        self.assertEqual(enhance_description("  built things "), "Built things")
        self.assertEqual(enhance_description(""), "")

    def test_optimize_collapses_blank_lines_and_bullets(self):
        text = "A\n\n\n\nB\n- item\n* other"
        self.assertEqual(optimize_text_for_ats(text, StructuredResume()), "A\n\nB\n• item\n• other")

    def test_optimize_labels_email(self):
        data = StructuredResume(personal_info=PersonalInfo(email="a@b.com"))
        self.assertEqual(optimize_text_for_ats("a@b.com", data), "Email: a@b.com")

    def test_optimize_normalizes_numeric_dates(self):
        self.assertEqual(optimize_text_for_ats("Since 15.06.2021", StructuredResume()), "Since 06/2021")
        self.assertEqual(optimize_text_for_ats("Since 15-06-21", StructuredResume()), "Since 06/2021")

    def test_optimize_leaves_slashed_scores_alone(self):
        self.assertEqual(optimize_text_for_ats("GPA: 8.5/10", StructuredResume()), "GPA: 8.5/10")


class TestResumeGenerator(unittest.TestCase):

    @patch('resume_checker.generator.Document')
    def test_generate_uses_document(self, mock_document_class):
        mock_doc = MagicMock()
        mock_document_class.return_value = mock_doc

        result = ResumeGenerator().generate(sample_resume(), "Jane_Doe_ATS_Resume.docx")

        self.assertTrue(mock_doc.add_paragraph.called)
        runs = [args[0] for args, _ in mock_doc.add_paragraph.return_value.add_run.call_args_list if args]
        self.assertIn("JANE DOE", runs)
        self.assertIn("PROFESSIONAL SUMMARY", runs)
        self.assertIn("PROFESSIONAL EXPERIENCE", runs)
        mock_doc.save.assert_called_once()
        self.assertEqual(result.file_name, "Jane_Doe_ATS_Resume.docx")

    @patch('resume_checker.generator.Document')
    def test_formatting_applied(self, mock_document_class):
        """Headers keep with the following paragraph; widow control is on."""
        mock_format = MagicMock()
        mock_document_class.return_value.add_paragraph.return_value.paragraph_format = mock_format

        ResumeGenerator().generate(sample_resume(), "out.docx")

        self.assertTrue(mock_format.keep_with_next)
        self.assertTrue(mock_format.widow_control)

    def test_transcript_sections_in_order(self):
        result, text = generate_resume(sample_resume(), "Jane_Doe_ATS_Resume.docx")
        self.assertEqual(text, result.text)
        self.assertTrue(text.startswith("JANE DOE\nCONTACT INFORMATION\nEmail: jane@example.com"))
        positions = [text.index(h) for h in ("PROFESSIONAL SUMMARY", "EDUCATION",
                                              "PROFESSIONAL EXPERIENCE", "SKILLS")]
        self.assertEqual(positions, sorted(positions))
        self.assertNotIn("PROJECTS", text)
        self.assertNotIn("\n\n\n", text)

    def test_transcript_content(self):
        text = ResumeGenerator().generate(sample_resume(), "x.docx").text
        self.assertIn("strong background in Python, SQL, React.", text)
        self.assertIn("06/2021", text)
        self.assertIn("GPA: 3.8", text)
        self.assertIn("01/2021 - Present", text)
        self.assertIn("• Built APIs for 300 users", text)
        self.assertIn("Python, SQL, React, Go", text)

    def test_gpa_out_of_ten_is_not_a_date(self):
        data = StructuredResume(
            personal_info=PersonalInfo(name="Ravi Kumar", email="ravi@example.com"),
            education=[EducationEntry(degree="B.Tech Computer Science", institution="NIT", gpa="8.5/10")],
        )
        text = ResumeGenerator().generate(data, "x.docx").text
        self.assertIn("GPA: 8.5/10", text)
        self.assertNotIn("05/2010", text)

    def test_explicit_summary_is_kept(self):
        data = sample_resume()
        data.summary = "Backend engineer."
        text = ResumeGenerator().generate(data, "x.docx").text
        self.assertIn("Backend engineer.", text)
        self.assertNotIn("Experienced professional", text)

    def test_minimal_resume_gets_boilerplate_summary(self):
        data = StructuredResume(personal_info=PersonalInfo(name="Jane Doe", email="j@x.com"))
        text = ResumeGenerator().generate(data, "x.docx").text
        self.assertIn("PROFESSIONAL SUMMARY", text)
        self.assertIn("strong background in technology and development.", text)
        for header in ("EDUCATION", "PROFESSIONAL EXPERIENCE", "SKILLS", "PROJECTS",
                       "CERTIFICATIONS", "ACHIEVEMENTS"):
            self.assertNotIn(header, text)

    def test_document_is_readable_docx(self):
        result = ResumeGenerator().generate(sample_resume(), "x.docx")
        doc = Document(io.BytesIO(result.content))
        texts = [p.text for p in doc.paragraphs]
        self.assertIn("JANE DOE", texts)
        self.assertIn("EDUCATION", texts)
        self.assertEqual(result.page_count, 1)

    def test_long_resume_paginates(self):
        data = sample_resume()
        data.experience[0].description = [f"delivered milestone number {i}" for i in range(150)]
        result = ResumeGenerator().generate(data, "x.docx")
        self.assertGreater(result.page_count, 1)
        doc = Document(io.BytesIO(result.content))
        self.assertTrue(any(p.paragraph_format.page_break_before for p in doc.paragraphs))

    def test_generator_is_reusable(self):
        generator = ResumeGenerator()
        first = generator.generate(sample_resume(), "x.docx")
        second = generator.generate(sample_resume(), "x.docx")
        self.assertEqual(first.text, second.text)

    def test_regenerated_text_scores_dates(self):
        result = ResumeGenerator().generate(sample_resume(), "Jane_Doe_ATS_Resume.docx")
        report = score_resume(result.text, result.file_name)
        self.assertEqual(report.breakdown['fileFormat'].score, 10)
        self.assertEqual(report.breakdown['dateFormats'].score, 10)
        self.assertEqual(report.breakdown['structure'].score, 10)

    def test_save(self):
        result = ResumeGenerator().generate(sample_resume(), "x.docx")
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, result.file_name)
            result.save(path)
            with open(path, 'rb') as f:
                self.assertEqual(f.read(), result.content)


if __name__ == '__main__':
    unittest.main()
