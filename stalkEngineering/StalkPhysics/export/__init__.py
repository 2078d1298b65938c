# -- Export Subpackage -- #

'''
Downstream solver case export.
'''

from stalkEngineering.StalkPhysics.export.caseExporter import CaseExporter, CaseRecord, jobName
