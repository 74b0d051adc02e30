import unittest
from unittest.mock import MagicMock

from backend.vision import ClassifierError, CloudVisionClassifier, StaticClassifier
from shared.types import Likelihood, ObjectRef, SafeSearchVerdict

REF = ObjectRef(bucket="friendlychat.appspot.com", path="uid/msg1/cat.png")


class CloudVisionClassifierTests(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.response = self.client.safe_search_detection.return_value
        self.response.error.message = ""

    def test_classify_maps_likelihoods(self):
        self.response.safe_search_annotation.adult = 4
        self.response.safe_search_annotation.violence = 2

        verdict = CloudVisionClassifier(client=self.client).classify(REF)

        self.assertEqual(
            verdict,
            SafeSearchVerdict(adult=Likelihood.LIKELY, violence=Likelihood.UNLIKELY),
        )
        image = self.client.safe_search_detection.call_args.kwargs["image"]
        self.assertEqual(
            image.source.image_uri, "gs://friendlychat.appspot.com/uid/msg1/cat.png"
        )

    def test_classify_raises_on_response_error(self):
        self.response.error.message = "Bad image data."

        with self.assertRaises(ClassifierError):
            CloudVisionClassifier(client=self.client).classify(REF)


class StaticClassifierTests(unittest.TestCase):
    def test_defaults_to_safe_verdict(self):
        classifier = StaticClassifier()

        self.assertFalse(classifier.classify(REF).is_inappropriate())
        self.assertEqual(classifier.calls, [REF])


if __name__ == "__main__":
    unittest.main()
