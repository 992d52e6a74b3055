"""
scoring/: Candidate Evaluation Scoring Engine

Modules:
    utils.py                     - Decimal utilities
    taxonomy.py                  - Taxonomy Normalizer (ordered rule tables)
    record_mapper.py             - Raw record → CandidateProfile
    competence_calculator.py     - Competence sub-score
    integrity_calculator.py      - Integrity sub-score + PenaltyTable
    transparency_calculator.py   - Transparency sub-score
    confidence_calculator.py     - Confidence sub-score
    weights.py                   - WeightPreset / CustomWeights / PresetFamily
    composite_calculator.py      - Composite Combiner
    integration_service.py       - Full per-candidate pipeline
    invariant_checker.py         - Batch audit over stored scores
"""
