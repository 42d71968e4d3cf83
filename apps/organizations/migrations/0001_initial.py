import uuid

import django.db.models.deletion
from django.db import migrations, models

COMPLETION = [('COMPLETED', 'Completed'), ('NOT_COMPLETED', 'Not completed')]


def base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('deleted_on', models.DateTimeField(blank=True, null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('nomenclatures', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Contact',
            fields=base_fields() + [
                ('full_name', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='OrganizationGeneral',
            fields=base_fields() + [
                ('name', models.CharField(max_length=255, unique=True)),
                ('alias', models.CharField(max_length=255, unique=True)),
                ('type', models.CharField(choices=[('ASSOCIATION', 'Association'), ('FOUNDATION', 'Foundation'), ('FEDERATION', 'Federation')], max_length=20)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(max_length=20, unique=True)),
                ('year_created', models.PositiveSmallIntegerField()),
                ('cui', models.CharField(max_length=20, unique=True, verbose_name='CUI')),
                ('raf_number', models.CharField(max_length=50, unique=True, verbose_name='RAF number')),
                ('association_registry_number', models.CharField(blank=True, max_length=100, null=True)),
                ('association_registry_part', models.CharField(blank=True, max_length=100, null=True)),
                ('association_registry_section', models.CharField(blank=True, max_length=100, null=True)),
                ('association_registry_issuer', models.CharField(blank=True, max_length=255, null=True)),
                ('national_registry_number', models.CharField(blank=True, max_length=100, null=True)),
                ('short_description', models.CharField(blank=True, max_length=250, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('address', models.CharField(blank=True, max_length=255, null=True)),
                ('organization_address', models.CharField(blank=True, max_length=255, null=True)),
                ('logo', models.CharField(blank=True, help_text='Storage key of the logo', max_length=500, null=True)),
                ('website', models.URLField(blank=True, null=True)),
                ('facebook', models.URLField(blank=True, null=True)),
                ('instagram', models.URLField(blank=True, null=True)),
                ('twitter', models.URLField(blank=True, null=True)),
                ('linkedin', models.URLField(blank=True, null=True)),
                ('tiktok', models.URLField(blank=True, null=True)),
                ('donation_website', models.URLField(blank=True, null=True)),
                ('redirect_link', models.URLField(blank=True, null=True)),
                ('donation_sms', models.CharField(blank=True, max_length=20, null=True)),
                ('donation_keyword', models.CharField(blank=True, max_length=50, null=True)),
                ('city', models.ForeignKey(null=True, on_delete=django.db.models.deletion.PROTECT, related_name='general_city+', to='nomenclatures.city')),
                ('county', models.ForeignKey(null=True, on_delete=django.db.models.deletion.PROTECT, related_name='general_county+', to='nomenclatures.county')),
                ('organization_city', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='general_organization_city+', to='nomenclatures.city')),
                ('organization_county', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='general_organization_county+', to='nomenclatures.county')),
                ('contact', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='general_contact+', to='organizations.contact')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='OrganizationActivity',
            fields=base_fields() + [
                ('area', models.CharField(choices=[('LOCAL', 'Local'), ('REGIONAL', 'Regional'), ('NATIONAL', 'National'), ('INTERNATIONAL', 'International')], max_length=20)),
                ('is_part_of_federation', models.BooleanField(default=False)),
                ('is_part_of_coalition', models.BooleanField(default=False)),
                ('is_part_of_international_organization', models.BooleanField(default=False)),
                ('international_organization_name', models.CharField(blank=True, max_length=255, null=True)),
                ('is_social_service_viable', models.BooleanField(default=False)),
                ('offers_grants', models.BooleanField(default=False)),
                ('is_public_interest_organization', models.BooleanField(default=False)),
                ('has_branches', models.BooleanField(default=False)),
                ('branches', models.ManyToManyField(blank=True, related_name='activity_branches+', to='nomenclatures.city')),
                ('cities', models.ManyToManyField(blank=True, related_name='activity_cities+', to='nomenclatures.city')),
                ('coalitions', models.ManyToManyField(blank=True, related_name='activity_coalitions+', to='nomenclatures.coalition')),
                ('domains', models.ManyToManyField(blank=True, related_name='activity_domains+', to='nomenclatures.domain')),
                ('federations', models.ManyToManyField(blank=True, related_name='activity_federations+', to='nomenclatures.federation')),
                ('regions', models.ManyToManyField(blank=True, related_name='activity_regions+', to='nomenclatures.region')),
            ],
            options={
                'verbose_name_plural': 'Organization activities',
            },
        ),
        migrations.CreateModel(
            name='OrganizationLegal',
            fields=base_fields() + [
                ('other_information', models.JSONField(blank=True, default=list, help_text='Other relevant persons')),
                ('organization_statute', models.CharField(blank=True, help_text='Storage key of the statute', max_length=500, null=True)),
                ('directors', models.ManyToManyField(blank=True, related_name='legal_directors+', to='organizations.contact')),
                ('legal_representative', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='legal_representative+', to='organizations.contact')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='OrganizationReport',
            fields=base_fields(),
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Organization',
            fields=base_fields() + [
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('ACTIVE', 'Active'), ('RESTRICTED', 'Restricted')], db_index=True, default='PENDING', max_length=20)),
                ('completion_status', models.CharField(choices=COMPLETION, default='NOT_COMPLETED', max_length=20)),
                ('synced_on', models.DateTimeField(blank=True, null=True)),
                ('organization_activity', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='organization', to='organizations.organizationactivity')),
                ('organization_general', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='organization', to='organizations.organizationgeneral')),
                ('organization_legal', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='organization', to='organizations.organizationlegal')),
                ('organization_report', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='organization', to='organizations.organizationreport')),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='OrganizationFinancial',
            fields=base_fields() + [
                ('type', models.CharField(choices=[('Income', 'Income'), ('Expense', 'Expense')], max_length=10)),
                ('year', models.PositiveSmallIntegerField()),
                ('number_of_employees', models.PositiveIntegerField(default=0)),
                ('total', models.DecimalField(decimal_places=2, default=0, help_text='Total reported by ANAF', max_digits=15)),
                ('data', models.JSONField(blank=True, help_text='Per-category amounts entered by the organization', null=True)),
                ('synched_anaf', models.BooleanField(default=False)),
                ('status', models.CharField(choices=COMPLETION, default='NOT_COMPLETED', max_length=20)),
                ('report_status', models.CharField(choices=[('NOT_COMPLETED', 'Not completed'), ('PENDING', 'Pending'), ('COMPLETED', 'Completed'), ('INVALID', 'Invalid')], default='NOT_COMPLETED', max_length=20)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='organization_financial', to='organizations.organization')),
            ],
            options={
                'ordering': ['-year', 'type'],
            },
        ),
        migrations.CreateModel(
            name='Report',
            fields=base_fields() + [
                ('year', models.PositiveSmallIntegerField()),
                ('report', models.URLField(blank=True, help_text='Link to the published activity report', null=True)),
                ('number_of_volunteers', models.PositiveIntegerField(blank=True, null=True)),
                ('number_of_contractors', models.PositiveIntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=COMPLETION, default='NOT_COMPLETED', max_length=20)),
                ('organization_report', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reports', to='organizations.organizationreport')),
            ],
            options={
                'ordering': ['-year'],
            },
        ),
        migrations.CreateModel(
            name='Partner',
            fields=base_fields() + [
                ('year', models.PositiveSmallIntegerField()),
                ('number_of_partners', models.PositiveIntegerField(blank=True, null=True)),
                ('path', models.CharField(blank=True, help_text='Storage key of the partner list', max_length=500, null=True)),
                ('status', models.CharField(choices=COMPLETION, default='NOT_COMPLETED', max_length=20)),
                ('organization_report', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='partners', to='organizations.organizationreport')),
            ],
            options={
                'ordering': ['-year'],
            },
        ),
        migrations.CreateModel(
            name='Investor',
            fields=base_fields() + [
                ('year', models.PositiveSmallIntegerField()),
                ('number_of_investors', models.PositiveIntegerField(blank=True, null=True)),
                ('path', models.CharField(blank=True, help_text='Storage key of the investor list', max_length=500, null=True)),
                ('status', models.CharField(choices=COMPLETION, default='NOT_COMPLETED', max_length=20)),
                ('organization_report', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='investors', to='organizations.organizationreport')),
            ],
            options={
                'ordering': ['-year'],
            },
        ),
    ]
