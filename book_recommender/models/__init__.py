"""Feature extraction and similarity models for content-based recommendation.

- book: Book, SimilarityResult, Recommendation data model
- tfidf_vectorizer: distinct-term TF-IDF over Indonesian text
- genre_encoder: multi-hot genre encoding
- feature_combiner: namespaced [title | genre | synopsis] concatenation
- similarity: cosine similarity and top-N ranking
"""
