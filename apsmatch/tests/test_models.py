from apsmatch.core.models import SubjectMark, UserAcademicRecord, Degree

def test_subject_mark():
    sm = SubjectMark(subject='Mathematics', mark=75)
    assert sm.subject == 'Mathematics'
    assert sm.mark == 75

def test_record_defaults():
    r = UserAcademicRecord()
    assert r.subject_marks == []
    assert r.nbt_scores == {}
    assert r.raw_total() == 0

def test_record_find_and_total():
    r = UserAcademicRecord(subject_marks=[SubjectMark('Mathematics', 75), SubjectMark('History', 60)])
    assert r.find('History').mark == 60
    assert r.find('Geography') is None
    assert r.raw_total() == 135

def test_degree_defaults():
    d = Degree(id=1, name='BA')
    assert d.point_requirement is None
    assert d.subject_requirements == []
